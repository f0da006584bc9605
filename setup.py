from setuptools import setup, find_namespace_packages


setup(
    name='launch_curve',
    version='0.1',
    packages=find_namespace_packages(where="src", include=["launch_curve*"]),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
