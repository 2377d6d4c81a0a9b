#!/usr/bin/env python3

from setuptools import setup
import os


directory = os.path.dirname(os.path.realpath(__file__))


if __name__ == "__main__":
    setup(
        name="tetfile",
        packages=[
            "tetfile",
            "tetfile.core",
            "tetfile.loaders",
            "tetfile.mesh",
            "tetfile.render",
        ],
        python_requires='>3.10.0',
        version="0.1.0",
        license="MIT",
        description="Loader and render buffers for triangulated tetrahedral meshes",
        long_description=open(os.path.join(
            directory, "README.md"), "r", encoding="utf8").read(),
        long_description_content_type="text/markdown",
        keywords=["mesh", "tetrahedral", "normals"],
        classifiers=[],
        include_package_data=True,
        install_requires=[
            "numpy",
            "scipy",
            "requests",
        ],
        extras_require={
            "test": [
                "pytest",
            ],
        },
        entry_points={
            "console_scripts": [
                "tetfile-info=tetfile.__main__:main",
            ],
        },
        zip_safe=False,
    )
