#!/usr/bin/env python

from itertools import chain
from pathlib import Path
from setuptools import setup, find_packages

project_root = Path(__file__).resolve().parent
long_description = project_root.joinpath('readme.rst').read_text('utf-8')

about = {}
with project_root.joinpath('temp_convert', '__version__.py').open('r', encoding='utf-8') as f:
    exec(f.read(), about)

scripts = ['bin/{}'.format(p.name) for p in project_root.joinpath('bin').iterdir()]

optional_dependencies = {
    'dev': [                                            # Development env requirements
        'coverage',
        'pytest',
    ],
}
optional_dependencies['ALL'] = sorted(set(chain.from_iterable(optional_dependencies.values())))

requirements = [
    'cli_command_parser>=2022.9.11',
    'flask',
    'jinja2',
    'PyYAML',
    'tzlocal',
    'werkzeug',
]


setup(
    name=about['__title__'],
    version=about['__version__'],
    author=about['__author__'],
    author_email=about['__author_email__'],
    description=about['__description__'],
    long_description=long_description,
    url=about['__url__'],
    project_urls={'Source': about['__url__']},
    packages=find_packages(include=('temp_convert', 'temp_convert.*')),
    classifiers=[
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
    python_requires='>=3.9',
    install_requires=requirements,
    extras_require=optional_dependencies,
    scripts=scripts,
)
