"""Test suite for the hiera-lookup package.

This package contains unit and integration tests validating
interpolation, hierarchy resolution, answer merging, backends,
configuration loading and the command-line interface.
"""
