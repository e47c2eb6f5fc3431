from setuptools import setup


setup(
    name='rpnbrain',
    version='0.1.0',
    description='RPN calculator engine',
    install_requires=[
        'regex',
        'prompt_toolkit',
    ],
    packages=['rpnbrain'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    python_requires='>=3.7',
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
        ],
    },
    entry_points={
        'console_scripts': [
            'rpnbrain = rpnbrain.cli:main',
        ],
    },
    license='ISC',
)
