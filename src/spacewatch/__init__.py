
__prog__ = 'spacewatch'
__version__ = '1.0.0'
