from setuptools import setup, find_packages

setup(
    name="trajtrust",
    version="0.1.0",
    description="Reputation for mobile agents from interaction evidence and trajectory similarity",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["pydantic>=2.0", "python-json-logger>=3.1", "openpyxl>=3.1"],
    extras_require={"dev": ["pytest>=7.0"]},
    entry_points={"console_scripts": ["trajtrust=trajtrust.cli:main"]},
    python_requires=">=3.9",
    license="CC0-1.0",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering",
        "Topic :: Software Development :: Libraries",
        "License :: CC0 1.0 Universal (CC0 1.0) Public Domain Dedication",
        "Programming Language :: Python :: 3",
    ],
    keywords="reputation trust vehicular-network subjective-logic trajectory lcs",
)
