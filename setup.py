from setuptools import setup, find_packages

# Core dependencies (always required)
install_requires = [
    "PyMySQL>=1.1.0,<2.0.0",
    "psycopg2-binary>=2.9.0,<3.0.0",
]

# Optional dependencies
extras_require = {
    "test": ["pytest>=7.0"],
}

setup(
    name="querybind",
    version="0.1.0",
    description="Declarative update statements with nested parameter binding for DB-API drivers",
    packages=find_packages(),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
