from setuptools import setup, find_packages

setup(
    name="symbolinput",
    version="0.1.0",
    description="symbolinput — type Unicode symbols through leader-prefixed abbreviations",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "PyQt5>=5.15",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "symbolinput=symbolinput.main:main",
        ],
    },
    package_data={
        "symbolinput": [
            "resources/*",
        ],
    },
    include_package_data=True,
)
