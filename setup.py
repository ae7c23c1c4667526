from setuptools import setup, find_packages

setup(
    name="kdt",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "quantcrypt",
        "cryptography",
        "python-dotenv",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "kdt=kdt.cli:main",
        ],
    },
)
