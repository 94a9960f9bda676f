from setuptools import setup, find_packages

setup(
    name="cmakelists_edit",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "cmakelists-edit=cmakelists_edit.cli:main",
        ],
    },
    description="Edit source file lists in CMakeLists files without reformatting them.",
)
