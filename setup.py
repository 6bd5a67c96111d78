# !/usr/bin/env python

from setuptools import setup, find_packages

setup(
    name='restmodel-python',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
      'attrs>=19.1.0',
      'marshmallow>=3.13.0',
      'httpx>=0.24',
      'inflection>=0.5',
      'python-dotenv>=0.10',
    ],
    extras_require={
      'test': ['pytest'],
    },
    version='0.1.0',
    description='Map JSON REST APIs to Python resources with lazy associations',
    author='Michael Elsdorfer',
    license='BSD',
    author_email='michael@elsdorfer.com',
    keywords=['rest', 'json', 'api', 'orm'],
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Natural Language :: English',
        'License :: OSI Approved :: BSD License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython',
        'Programming Language :: Python :: Implementation :: PyPy',
        'Topic :: Software Development',
        'Topic :: Internet :: WWW/HTTP',
    ],
)
