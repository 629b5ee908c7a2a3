from setuptools import setup, find_packages

setup(
    name="emgstream",
    version="0.1.0",
    description="Live EMG sample buffering, RMS windowing and CSV recording export",
    author="",
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.21.0",
        "pyyaml>=6.0.0",
        "pypubsub>=4.0.3",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
)
