import setuptools

with open('README.md', 'rt') as f:
    long_description = f.read()

setuptools.setup(
    name='pibounds',
    version='0.1.0',
    description='rigorous enclosures of pi from series, with directed-rounding floating point',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',
    python_requires='>=3.9',
    install_requires=['gmpy2>=2.1.2'],
    extras_require={
        'test': ['pytest>=7.0', 'hypothesis>=6.0'],
    },
    packages=['pibounds', 'pibounds.numeric', 'pibounds.arithmetic'],
    entry_points={
        'console_scripts': ['pibounds=pibounds.cli:main'],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Operating System :: POSIX :: Linux',
        'License :: OSI Approved :: MIT License',
    ],
)
