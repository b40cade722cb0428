from setuptools import setup, find_packages

# pymegapi/__init__.py imports pyserial, which is not installed at build time.
with open("pymegapi/version.txt", "r", encoding="utf-8") as f:
  __version__ = f.read().strip()

with open("README.md", "r", encoding="utf-8") as f:
  long_description = f.read()


extras_dev = [
  "pytest",
  "pytest-timeout",
  "pylint",
  "mypy",
]

# Some extras are not available on all platforms. `dev` should be available everywhere
extras_all = extras_dev

setup(
  name="PyMegaPi",
  version=__version__,
  packages=find_packages(include=["pymegapi", "pymegapi.*"]),
  description="Asyncio driver for the Makeblock MegaPi controller board",
  long_description=long_description,
  long_description_content_type="text/markdown",
  install_requires=["typing_extensions", "pyserial"],
  package_data={"pymegapi": ["version.txt"]},
  extras_require={
    "dev": extras_dev,
    "all": extras_all,
  },
)
