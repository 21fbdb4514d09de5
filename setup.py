from setuptools import setup, find_packages

setup(
    name="declarg",
    version="0.1.0",
    description="Declarative command-line argument parsing with nested subcommands.",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="Roland Thomas Jr",
    author_email="roland@rtj.dev",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "rich>=13",
        "prompt_toolkit>=3",
        "pydantic>=2",
        "python-json-logger>=3.1",
        "python-dateutil>=2.8",
    ],
    extras_require={
        "test": ["pytest>=7", "pytest-asyncio>=0.21"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Development Status :: 3 - Alpha",
    ],
)
