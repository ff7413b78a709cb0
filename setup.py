"""Packaging information for filemirror."""

import sys

import setuptools

from filemirror.constants import VERSION

if sys.version_info[:3] < (3, 8, 0):
    print("filemirror requires Python 3.8 to run.")
    sys.exit(1)

install_requires = [
    "watchdog>=2.1.0",
]

extras_require = {
    "dev": [
        "flake8>=3.7.9",
        "flake8-docstrings>=1.5.0",
        "flake8-import-order>=0.18.1",
        "black>=19.10b0",
        "pylint>=2.4.4",
        "mypy>=0.770",
        "pytest>=5.4.1",
        "pytest-cov>=2.8.1",
    ]
}


def _long_description():
    with open("README.md") as f:
        return f.read()


setuptools.setup(
    name="filemirror",
    version=VERSION,
    description="Mirror file changes to a remote host over a persistent connection.",
    long_description=_long_description(),
    long_description_content_type="text/markdown",
    license="Apache",
    packages=setuptools.find_packages(),
    entry_points={"console_scripts": ["filemirror = filemirror.__main__:main"]},
    install_requires=install_requires,
    extras_require=extras_require,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Intended Audience :: Information Technology",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX",
        "Topic :: System :: Archiving :: Mirroring",
    ],
    python_requires=">=3.8",
)
