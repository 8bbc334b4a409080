from setuptools import setup, find_packages

setup(
    name="field-extractor",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pydantic>=2.0.0",
        "click>=8.1.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "field-extract=field_extractor.cli:main",
            "field-extract-schemas=field_extractor.cli:list_schemas",
        ],
    },
)
