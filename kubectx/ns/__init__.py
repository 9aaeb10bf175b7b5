"""The kubens command: list and switch namespaces of the current context."""