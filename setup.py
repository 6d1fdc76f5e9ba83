#!/usr/bin/env python

from setuptools import setup

setup(
    name='radvd_dispatch',
    version='1.0',
    description='Regenerates radvd.conf from a template with the prefixes currently configured on the interfaces',
    author='Vitaly Greck',
    author_email='vintozver@ya.ru',
    url='https://www.python.org/sigs/distutils-sig/',
    packages=['radvd_dispatch'],
    install_requires=[
        'pyroute2', 'jinja2',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'radvd_dispatch=radvd_dispatch.run:dispatch',
        ],
    },
)
