#!/usr/bin/env python3
#
# Copyright (c) 2020-2021 Tatu Ylonen.  See LICENSE and https://ylonen.org

from setuptools import setup

with open("README.md", "r") as f:
    long_description = f.read()

setup(name="noddityprocessor",
      version="0.1.0",
      description="Replaces [[links]] and ::templates:: in parsed HTML/markup document trees",
      long_description=long_description,
      long_description_content_type="text/markdown",
      author="Tatu Ylonen",
      author_email="ylo@clausal.com",
      license="MIT",
      scripts=[],
      packages=["noddityprocessor"],
      package_dir={"": "src"},
      python_requires=">=3.9",
      install_requires=[],
      extras_require={"test": ["pytest"]},
      keywords=[
          "noddity",
          "hast",
          "html",
          "wikilinks",
          "templates",
          "markup",
      ],
      classifiers=[
          "Development Status :: 3 - Alpha",
          "Intended Audience :: Developers",
          "License :: OSI Approved :: MIT License",
          "Natural Language :: English",
          "Operating System :: OS Independent",
          "Programming Language :: Python",
          "Programming Language :: Python :: 3 :: Only",
          "Topic :: Text Processing",
          "Topic :: Text Processing :: Markup :: HTML",
          ])
