"""Setuptools entry point for building and distributing PyMatch.

Project metadata, dependencies and package discovery live in ``pyproject.toml``.
"""

from setuptools import setup


setup()
