#!/usr/bin/env python
import os
from setuptools import setup, find_packages

# Figure out the version. This could also be done by importing the
# module, the parsing takes place so that the dependencies need not be
# installed.
import re
here = os.path.dirname(os.path.abspath(__file__))
version_re = re.compile(
    r'__version__ = (\(.*?\))')
fp = open(os.path.join(here, 'src/lesscompiler', '__init__.py'))
version = None
for line in fp:
    match = version_re.search(line)
    if match:
        version = eval(match.group(1))
        break
else:
    raise Exception("Cannot find version in __init__.py")
fp.close()


setup(
    name='lesscompiler',
    version=".".join(map(str, version)),
    description='Reusable LESS to CSS compiler running the official LESS '
        'engine on Node.js',
    long_description='Compiles LESS stylesheets to CSS with the official '
        'JavaScript implementation of LESS, loaded once into a long-lived '
        'Node.js process. Output files are only rebuilt when the source, '
        'or any file it imports, has changed.',
    license='BSD',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Software Development :: Libraries',
        ],
    python_requires='>=3.6',
    extras_require={
        'test': ['pytest', 'mock'],
    },
    entry_points="""[console_scripts]\nlesscompiler = lesscompiler.script:run\n""",
    packages=find_packages('src'),
    package_dir={'': 'src'},
    package_data={'lesscompiler': ['data/*.js']},
)
