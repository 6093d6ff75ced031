import os
import setuptools
import sys

# Written according to the docs at
# https://packaging.python.org/en/latest/distributing.html

project_root = os.path.dirname(__file__)
readme_file = os.path.join(project_root, 'README.md')
module_root = os.path.join(project_root, 'svninfo')
version_file = os.path.join(module_root, 'VERSION')


def get_version():
    with open(version_file) as f:
        return f.read().strip()


def get_install_requires():
    dependencies = ['docopt', 'PyYAML']
    if sys.version_info < (3, 5):
        raise RuntimeError('The minimum supported Python version is 3.5.')
    return dependencies


def readme_text():
    with open(readme_file) as f:
        return f.read().strip()


setuptools.setup(
    name='svninfo',
    description='Subversion working copy info for build scripts',
    version=get_version(),
    license='MIT',
    packages=['svninfo'],
    package_data={'svninfo': ['VERSION']},
    entry_points={'console_scripts': [
        'svninfo=svninfo.main:main',
    ]},
    install_requires=get_install_requires(),
    extras_require={'test': ['flake8']},
    long_description=readme_text(),
    long_description_content_type='text/markdown',
)
