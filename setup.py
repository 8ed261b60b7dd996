#!/usr/bin/python
#-*-coding: utf-8 -*-

from setuptools import setup

setup(
    name='curvetools',
    version='0.1.0',
    description='Bezier segment kernel - evaluation, projection, arc length, subdivision, bounds',
    author='Nervures',
    author_email='be@nervures.com',
    license='LGPL-3.0',
    package_dir={
        'curvetools': 'sources/model',
    },
    packages=['curvetools'],
    package_data={
        'curvetools': ['*.cfg'],
    },
    install_requires=[
        'numpy>=1.20',
        'matplotlib>=3.5',
    ],
    extras_require={
        'test': ['pytest>=7'],
    },
    python_requires='>=3.8',
)
