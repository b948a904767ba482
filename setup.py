from setuptools import setup, find_packages

setup(
    name="sieve-validator",
    version="0.1.0",
    description="Composable string validation rules with time-windowed duplicate suppression",
    author="Sieve Team",
    packages=find_packages(include=["sieve", "sieve.*"]),
    python_requires=">=3.8",
    install_requires=[
        # Core dependencies - keep minimal
        "pyyaml>=6.0",        # For configuration files
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",   # For testing
            "pytest-cov>=4.0.0", # For test coverage
            "black>=23.0.0",   # For code formatting
        ]
    },
)
