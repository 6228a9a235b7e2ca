#!/usr/bin/env python

from setuptools import find_packages, setup

setup(
    name="blobtree",
    version="0.1.0",
    description="API to browse, preview and upload the files in S3 storage containers",
    packages=find_packages(include=["blobtree", "blobtree.*"]),
    include_package_data=True,
    zip_safe=False,
    keywords=["API", "S3", "storage"],
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    ],
    python_requires=">=3.10",
    install_requires=[
        "fastapi",
        "python-multipart",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
        "uvicorn",
        "httpx",
        "aiobotocore",
        "botocore",
        "types-aiobotocore-s3",
        "async-lru",
        "typing_extensions",
    ],
    extras_require={
        "dev": [
            "pytest",
            "anyio",
            "pytest-httpx",
            "mypy",
            "flake8",
        ]
    },
    entry_points={"console_scripts": ["blobtree = blobtree.__main__:main"]},
)
