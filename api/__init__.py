"""API module for the Redsys payment gateway."""

from .redsys_api import create_app, RedsysAPI

__all__ = ['create_app', 'RedsysAPI']
