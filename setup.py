#!/usr/bin/env python
"""
Badger
======

Badger is an asyncio client for the `Honeybadger <https://www.honeybadger.io/>`_
error tracking service. It describes any exception, or any error-like object
an adapter is registered for, builds the notice document and posts it with
`aiohttp <https://docs.aiohttp.org/>`_, reporting back whether the notice was
accepted, rejected or could not be delivered.
"""

from setuptools import setup, find_packages
import re
import ast


_version_re = re.compile(r'VERSION\s+=\s+(.*)')

with open('badger/__init__.py', 'rb') as f:
    version = str(ast.literal_eval(_version_re.search(
        f.read().decode('utf-8')).group(1)))


install_requires = [
    'aiohttp>=3.8',
]

tests_require = [
    'flake8',
    'mock',
    'pytest>=7.0',
    'pytest-asyncio>=0.21',
    'pytest-mock',
    'pytest-cov',
]


setup(
    name='badger-notifier',
    version=version,
    author='Badger Contributors',
    url='https://pypi.org/project/badger-notifier/',
    description='Badger is an asyncio client for Honeybadger (https://www.honeybadger.io)',
    long_description=__doc__,
    packages=find_packages(exclude=("tests", "tests.*",)),
    zip_safe=False,
    python_requires='>=3.8',
    extras_require={
        'tests': tests_require,
    },
    license='BSD',
    install_requires=install_requires,
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'badger = badger.scripts.runner:main',
        ],
    },
    classifiers=[
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python',
        'Topic :: Software Development',
    ],
)
