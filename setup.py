#!/usr/bin/env python

from setuptools import setup

import iterarray


read_md = lambda f: open(f, 'r').read()


setup(name='iterarray',
      version="{ver}.{rev}".format(
          ver=iterarray.__version__,
          rev=iterarray.__revision__,
      ),
      description='Iterative arrays of communicating processes in Python',
      long_description=read_md('README.md'),
      long_description_content_type="text/markdown",
      author='ITERARRAY Development Team',
      install_requires=['greenlet>=0.4.17'],
      extras_require={'test': ['pytest']},
      packages=['iterarray'],
      entry_points={
          'console_scripts': ['iterarray = iterarray.__main__:main'],
      },
      python_requires='>=3.6',
      platforms=['any'],
      keywords=['communicating sequential processes',
                'iterative array',
                'Concurrency',
                'channels',
                'greenlet'],
      license='LGPL',
      classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: Education',
        'License :: OSI Approved :: GNU Library or Lesser General Public '
        'License (LGPL)',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development',
        ],
     )
