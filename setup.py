import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="sng",
    version="0.0.1",
    description="Compile a textual notation of PNG images into PNG files",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["tests"]),
    scripts=[
        'scripts/sngc.py',
        'scripts/sngdisplay.py',
    ],
    install_requires=[
        'bitstring',
        'pillow',
    ],
    extras_require={
        'tests': [
            'pytest',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.8',
)
