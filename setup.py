from setuptools import setup, find_packages

setup(
    name="resourcecompetition",
    version="0.1.0",
    description="A small library for Tilman-style resource competition dynamics.",
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(include=['ResourceCompetition', 'ResourceCompetition.*']),
    install_requires=[
        "numpy",
        "scipy",
        "pyyaml",
    ],
    extras_require={
        'test': ['pytest']
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.8',
)
