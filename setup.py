from setuptools import setup, find_packages

setup(
    name="build-support-tools",
    version="1.0.0",
    description="Concurrent string scrubber and directory mirror for build trees",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "rich>=13.0",
        "tqdm>=4.60",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "strclear = apps.cli:cli_strclear",
            "dirsync = apps.cli:cli_dirsync",
            "config-check = common.shared.loader:cli_main",
        ],
    },
)
