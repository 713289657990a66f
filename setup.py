#!/usr/bin/env python3

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="timestamp-rename",
    version="1.1.0",
    author="Timestamp Rename contributors",
    description="Rename photos and videos to the time they were taken, using EXIF, QuickTime and XMP metadata",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["timestamp_rename", "timestamp_rename.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Graphics",
        "Topic :: Multimedia :: Video",
        "Topic :: System :: Filesystems",
        "Topic :: Utilities",
    ],
    python_requires=">=3.8",
    install_requires=[
        "Pillow>=9.4.0",
        "exifread>=3.0.0",
        "tqdm>=4.60.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "timestamp_rename=timestamp_rename.cli:main",
        ],
    },
    keywords="media, rename, exif, quicktime, xmp, photo, video, live photo, timestamp, metadata",
)
