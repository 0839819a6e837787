"""Setup file for the Content Search package."""

from setuptools import setup, find_packages

setup(
    name="content-search",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"content_search": ["data/*.txt"]},
    install_requires=[
        "click>=8.2",
        "httpx",
        "prometheus-client",
        "pydantic>=2",
        "python-dotenv",
        "pyyaml",
        "rich",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "content-search=content_search.__main__:main",
        ],
    },
    author="Pimentel",
    author_email="pimentel@example.com",
    description="Synonym-aware ranked search over a periodically refreshed content tree",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
)
