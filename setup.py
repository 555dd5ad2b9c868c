# -*- coding: utf-8 -*-
from setuptools import setup, find_packages

with open("README.md", "r") as fh:
    long_description = fh.read()


requirements = ["lief>=0.14.0"]


setup(
    name='rdemangle',
    # note to self: always change this in config as well.
    version='0.3.0',
    description='A bounded demangler for Rust v0 symbol names recovered from binaries.',
    long_description_content_type="text/markdown",
    long_description=long_description,
    license="BSD 2-Clause",
    packages=find_packages(exclude=('tests', 'docs')),
    python_requires='>=3.8',
    install_requires=requirements,
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Security",
        "Topic :: Software Development :: Disassemblers",
    ],
)
