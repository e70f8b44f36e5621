from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name='pykessler',
    use_scm_version={
        "local_scheme": "no-local-version", # STOPS LOCAL HASH BEING ADDED
        "fallback_version": "0.1.0",
                     },
    setup_requires=['setuptools_scm'],
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'pykessler': ['simulation_configurations/*.json'],
    },
    long_description=long_description,
    long_description_content_type='text/markdown',
    install_requires=[
        "numpy>=1.21",
        "pandas>=2.0",
        "scipy>=1.10",
        "tqdm>=4.65"
    ],
    extras_require={
        'dev': ['pytest', 'check-manifest'],
        'test': ['pytest', 'coverage'],
    },
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
)
