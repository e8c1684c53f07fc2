# setup.py
from setuptools import setup, find_packages

setup(
    name='qlayer',
    version='0.1.0',
    description='Declarative Qt widgets and layer-shell style windows for desktop shells.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',

    # `qlayer` and `qlayer_cli`
    packages=find_packages(exclude=['tests', 'tests.*']),

    install_requires=[
        'PySide6',
        'typer',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },

    # `qlayer` executable calling the `app` object inside `qlayer_cli.main`
    entry_points={
        'console_scripts': [
            'qlayer = qlayer_cli.main:app',
        ],
    },

    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX :: Linux',
        'Intended Audience :: Developers',
        'Topic :: Desktop Environment',
    ],
    python_requires='>=3.10',
)
