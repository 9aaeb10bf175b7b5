# kubectx

Two small command-line tools for working with a kubeconfig file:

- `kubectx` lists, switches, renames and deletes contexts.
- `kubens` lists and switches namespaces within the current context.

Both tools edit the kubeconfig file in place, keeping the order of its
entries, and remember your previous choice so you can flip back with `-`.

## Installation

```
pip install .
```

This installs the `kubectx` and `kubens` commands.

## kubectx

```
kubectx                       : list the contexts
kubectx <NAME>                : switch to context <NAME>
kubectx -                     : switch to the previous context
kubectx -c, --current         : show the current context name
kubectx <NEW_NAME>=<NAME>     : rename context <NAME> to <NEW_NAME>
kubectx <NEW_NAME>=.          : rename current-context to <NEW_NAME>
kubectx -u, --unset           : unset the current context
kubectx -d <NAME> [<NAME...>] : delete context <NAME> ('.' for current-context)
                                (this command won't delete the user/cluster entry
                                 referenced by the context entry)
kubectx -h,--help             : show this message
kubectx -V,--version          : show version
```

Contexts are listed in natural sort order (`c2` before `c10`), with the
active one highlighted. Renaming onto an existing name overwrites that
context, with a warning. The previously active context is stored in
`~/.kube/kubectx`.

## kubens

```
kubens                    : list the namespaces in the current context
kubens <NAME>             : change the active namespace of current context
kubens -                  : switch to the previous namespace in this context
kubens -c, --current      : show the current namespace
kubens -h,--help          : show this message
kubens -V,--version       : show version
```

A context without a namespace is reported as being in `default`.

Listing namespaces and checking that a namespace exists before switching to
it query the API server of the current context's cluster, so the cluster has
to be reachable. The connection uses the cluster's `server`,
`certificate-authority` / `certificate-authority-data`,
`insecure-skip-tls-verify` and `proxy-url`, and the user's client
certificate and key (file or data), `token`, `tokenFile`, `username` /
`password`, or an `exec` credential plugin.

The previous namespace of each context is stored in a file named after the
context under `~/.kube/kubens/` (on Windows, `:` in the name becomes `__`).

## Interactive mode

When `fzf` is on your `PATH` and standard output is a terminal, running
`kubectx` or `kubens` with no arguments opens an interactive picker.
`kubectx -d` with no names picks a context to delete the same way. Set
`KUBECTX_IGNORE_FZF=1` to turn this off and get a plain list.

## Configuration

| Variable             | Effect                                                          |
|----------------------|-----------------------------------------------------------------|
| `KUBECONFIG`         | Path of the kubeconfig file (a single file only). Defaults to `~/.kube/config`. |
| `KUBECTX_IGNORE_FZF` | Disable the interactive picker.                                 |
| `NO_COLOR`           | Disable coloured output.                                        |
| `DEBUG`              | Print a traceback when a command fails.                         |

The home directory is taken from `HOME`, or `USERPROFILE` when `HOME` is not
set. The old `KUBECTX_CURRENT_FGCOLOR` and `KUBECTX_CURRENT_BGCOLOR`
variables are no longer used; a warning is printed if they are set.

Both commands exit with status 1 and an `error:` line on failure.

## As a kubectl plugin

If the commands are installed under the names `kubectl-ctx` and `kubectl-ns`,
they can be run as `kubectl ctx` and `kubectl ns`, and their help text
refers to themselves that way.

## Limitations

- `KUBECONFIG` may name only one file; a list of files is rejected.
- Only the first YAML document in the kubeconfig file is read and written.
- For cluster access, `auth-provider` user entries are not supported; use a
  token, client certificate, basic credentials or an `exec` plugin instead.

## Running the tests

```
pip install .[test]
pytest
```