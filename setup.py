import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="simd-msts",
    version="0.1.0",
    author="Vladimir Shulyak",
    author_email="vladimir@shulyak.net",
    description="Composable structural time series models with a SIMD Kalman filter",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=setuptools.find_packages("src"),
    python_requires=">=3.7",
    install_requires=[
        'numpy>=1.17',
        'statsmodels>=0.11.1',
        'simdkalman>=1.0.1'
    ],
    extras_require={
        'test': ['pytest', 'pandas']
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
