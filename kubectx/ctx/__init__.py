"""The kubectx command: list, switch, rename, unset and delete contexts."""