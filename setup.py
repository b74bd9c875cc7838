from setuptools import find_packages, setup

setup(
    name='spec-tester',
    version='1.0.0',
    description='Parallel package spec linter with per-spec logs',
    python_requires='>=3.9',
    packages=find_packages(exclude=[
        'spectester.test',
        'spectester.test.*',
    ]),
    install_requires=[
        'chardet',
        'python-dateutil',
        'simplejson',
    ],
    extras_require={
        'test': [
            'mock',
            'pytest',
        ],
    },
    entry_points={
        "console_scripts": [
            "spectester = spectester.main:main",
            "modelcache = spectester.cache_main:main",
        ],
    }
)
