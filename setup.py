from setuptools import setup, find_packages
import os
import io
import re

here = os.path.abspath(os.path.dirname(__file__))
pkgdir = os.path.join(here, "src", "weaktrie")

# Get the long description from the README file
with io.open(os.path.join(pkgdir, "README.weaktrie-doc.rst"), encoding="utf-8") as ff:
    long_description = ff.read()

with io.open(os.path.join(pkgdir, "version.py"), encoding="utf-8") as ff:
    __version__ = re.search(r'__version__ = "([^"]+)"', ff.read()).group(1)

setup(
    name="weaktrie",
    version=__version__,
    description="Memoize functions of any arity on argument identity without keeping arguments alive",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    python_requires=">=3.9",
    license="GPLv3+",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13"
    ],
    keywords="memoize cache weakref trie",
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"weaktrie": ["README.weaktrie-doc.rst"]},
    include_package_data=True,
    install_requires=[
        "configargparse>=1.5.3",
        "appdirs>=1.4.4",
        "psutil>=5.9.0",
        "rich>=12.0.0",
        "rich_rst>=1.1.7",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    scripts=[ff for ff in os.listdir(here) if ff.startswith("weaktrie-")],
)
