#!/usr/bin/python

from abc import abstractmethod


class AbstractLabelProvider:

    def __init__(self, config):
        raise NotImplementedError

    @abstractmethod
    def update(self, binary_info):
        """Parse the given target and (re-)populate the provider's symbols"""
        raise NotImplementedError

    @abstractmethod
    def getSymbol(self, address):
        """Return the display name of the symbol at the given address, or an empty string"""
        raise NotImplementedError

    @abstractmethod
    def isSymbolProvider(self):
        """Returns whether the getSymbol(..) function of the AbstractLabelProvider is functional"""
        return False

    @abstractmethod
    def getFunctionSymbols(self):
        """Return all function symbols as {address: name}"""
        return {}
