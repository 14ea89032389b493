from setuptools import setup, find_packages

setup(
    name='entmoot',
    version='0.1.0',
    description='Entmoot: a forward-chaining rule engine for the Entish language',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=["tests", "tests.*", "test_scripts"]),
    install_requires=[

        'lark>=1.2.2',
        'pandas',
        'numpy',
        'pyyaml',

    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.11',
)
