#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import re
from pathlib import Path

from setuptools import find_packages, setup

# read without importing the package, its dependencies may not be installed yet
_version_file = Path(__file__).parent / 'concordium_derive' / 'version.py'
__version__ = re.search(r"^BASE_VERSION = '([^']+)'", _version_file.read_text(), re.M).group(1)

setup(
    name='concordium-derive',
    version=__version__,
    description='Codec, schema and entry point generation for Concordium smart contracts',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache License 2.0',
    python_requires='>=3.11',
    entry_points={
        'console_scripts': ['concordium-derive=concordium_derive.cli.main:main'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    packages=find_packages(exclude=('concordium_derive_tests', 'concordium_derive_tests.*')),
    install_requires=[
        'colorama',
        'configargparse',
        'pydantic>=2',
        'PyYAML',
        'structlog',
        'typing_extensions>=4.10',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
