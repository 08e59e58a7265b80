from setuptools import setup, find_packages
import pathlib

# Detect layout
use_src = pathlib.Path("src/csvcodec").exists()
pkg_args = {"package_dir": {"": "src"}, "packages": find_packages(where="src")} if use_src \
           else {"packages": find_packages(where=".", exclude=["tests", "tests.*"])}

setup(
    name="csv-codec",
    version="0.1.0",
    python_requires=">=3.10",
    include_package_data=True,
    package_data={"csvcodec": ["schemas/*.json"]},
    install_requires=[
        "numpy",
        "pandas",
        "pydantic>=2",
        "pyyaml",
        "jsonschema",
        "typer",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["csvcodec=csvcodec.cli:app"],
    },
    **pkg_args
)
