#!/usr/bin/env python
"""
Copyright 2019 Hathor Labs

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

from setuptools import find_packages, setup

# importing cmcache would need its dependencies, which are not installed yet when building
with open('cmcache/version.py') as fp:
    __version__ = re.search(r"^__version__ = '([^']+)'", fp.read(), re.M).group(1)

setup(
    name='cmcache',
    version=__version__,
    description='Reader and writer for the compiled method cache file format',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache-2.0',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    python_requires='>=3.10',
    packages=find_packages(include=('cmcache', 'cmcache.*')),
    install_requires=[
        'structlog',
        'pydantic>=2',
        'PyYAML',
        'typing_extensions>=4.4',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
