import os
import setuptools


base_dir = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(base_dir, "README.md"), "rt", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name='circulararrays',
    version='0.1.0',
    description="Fixed-size arrays with circular (wraparound) indexing",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=['circulararrays'],
    python_requires='>=3.8',
    install_requires=[
        "numpy>=1.20.0",
        "pyyaml>=3.12",
    ],
    extras_require={
        'test': ["pytest>=6.0"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Topic :: Scientific/Engineering",
    ],
)
