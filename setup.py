from setuptools import setup, find_namespace_packages

setup(
    name="vitrine",
    version="1.0.0",
    packages=find_namespace_packages(include=["vitrine", "vitrine.*"]),
    package_data={"vitrine.presentation": ["templates/*.html", "templates/*/*.html"]},
    install_requires=[
        "django>=4.2",
        "djangorestframework",
        "drf-spectacular",
        "python-decouple",
        "requests",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    python_requires=">=3.11",
)
