"""
Setup script for widepath.

Usage:
    pip install -e .           # Editable install
    pip install -e ".[dev]"    # With test dependencies
"""

from setuptools import setup, find_packages


setup(
    name='widepath',
    version='0.1.0',
    description='Edge generation and junction reconciliation for networks of wide paths',
    python_requires='>=3.8',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    install_requires=[
        'numpy',
    ],
    extras_require={
        'dev': [
            'pytest',
        ],
    },
)
