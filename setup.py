from setuptools import setup, find_packages

# Basic information
VERSION = '0.1.0' # Initial version
DESCRIPTION = 'A CLI tool for downloading Literotica stories and series'
LONG_DESCRIPTION = 'This package provides a command-line interface to download Literotica stories and whole series as html, txt or markdown.'

# Define requirements
# Read from requirements.txt, but filter out comments and empty lines
try:
    with open('requirements.txt', encoding='utf-8') as f:
        install_requires = [line.strip() for line in f if line.strip() and not line.startswith('#')]
except FileNotFoundError:
    install_requires = [
        'requests',
        'beautifulsoup4',
        'click',
        'markdownify',
        'Markdown',
        'python-slugify',
    ]

setup(
    name='litero',
    version=VERSION,
    author='Litero Project Team',
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    packages=find_packages(include=['litero', 'litero.*']), # Find packages under litero
    package_data={'litero': ['templates/*']},
    include_package_data=True,
    install_requires=install_requires, # List of dependencies
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'litero = litero.cli.main:litero',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: End Users/Desktop',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'Topic :: Utilities',
    ],
    python_requires='>=3.9',
)
