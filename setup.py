# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="fslib",
    version="0.1.0",
    description="Rotating file logger and recursive directory toolkit (walk, remove, search)",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    # Subpackages follow the namespace layout (no __init__.py)
    packages=find_namespace_packages(where="src", include=["fslib", "fslib.*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": [
            "pytest>=7",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
