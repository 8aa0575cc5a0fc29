import os
import re
import sys

from setuptools import find_packages, setup

if sys.version_info < (3, 9):
    raise RuntimeError("agentjar requires Python 3.9+")


def read_version():
    regexp = re.compile(r'^__version__\W*=\W*"([\d.abrc]+)"')
    init_py = os.path.join(os.path.dirname(__file__), "agentjar", "__init__.py")
    with open(init_py) as f:
        for line in f:
            match = regexp.match(line)
            if match is not None:
                return match.group(1)
        else:
            msg = "Cannot find version in agentjar/__init__.py"
            raise RuntimeError(msg)


install_requires = [
    "attrs>=17.3.0",
    "multidict>=4.5",
    "yarl>=1.6",
]

tests_require = [
    "freezegun",
    "pytest",
]


setup(
    name="agentjar",
    version=read_version(),
    description="Domain and path scoped cookie jar for HTTP agents",
    platforms=["POSIX"],
    python_requires=">=3.9",
    packages=find_packages(include=["agentjar", "agentjar.*"]),
    install_requires=install_requires,
    extras_require={"test": tests_require},
    zip_safe=False,
)
