import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="go_annotations_to_openapi",
    version="1.0.0",
    description="Generate OpenAPI 3.0 documents from annotated Go source code",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Topic :: Software Development :: Documentation",
        "Intended Audience :: Developers",
    ],
    keywords="openapi swagger go golang annotations documentation generator",
    license="MIT",
    packages=find_packages(),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
        "jinja2>=3.0.0",
        "PyYAML>=6.0",
        "tree-sitter>=0.23.0",
        "tree-sitter-go>=0.23.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "go_annotations_to_openapi=go_annotations_to_openapi.go_annotations_to_openapi:go_annotations_to_openapi",
        ],
    },
    include_package_data=True,
    package_data={
        "go_annotations_to_openapi": ["templates/*.jinja2"],
    },
    zip_safe=False,
)
