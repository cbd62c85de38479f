from setuptools import setup, find_packages

setup(
    name="tide_crawler",
    version="0.2.0",
    description="NOAA Annual Tide Prediction Crawler",
    author="John Beil",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.31.0",
        "pandas>=2.0.0",
        "pyarrow>=14.0.1",  # For parquet export
        "pyyaml>=6.0.0",    # For YAML configuration files
        "SQLAlchemy>=2.0.0",
        "psycopg2-binary>=2.9.0",  # PostgreSQL driver
    ],
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'responses>=0.23.0',
            'black>=23.0.0',
            'flake8>=6.0.0',
            'mypy>=1.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'tide-crawler=tide_crawler.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Hydrology',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
)
