# kindtool

Building blocks for tooling that manages local Kubernetes clusters whose
"nodes" are containers.

## Modules

- `kindtool.errors`: errors that keep the stack where they were made.
  - `StackError` holds an optional message and an optional cause.
  - `new`, `new_without_stack` and `errorf` create errors.
  - `wrap`, `wrapf` and `with_stack` add context. Each returns `None` when given `None`.
  - `cause_of` and `stack_trace` follow a cause chain.
  - `Aggregate` holds several errors. Its `matches(target)` method tells whether any of
    them is `target` or wraps it.
  - `new_aggregate` flattens a list of errors and drops `None` entries. It returns a
    single error on its own.
  - `errors_of` returns the errors of the deepest aggregate in a chain.
- `kindtool.concurrent`: runs callables in threads.
  - `until_error_concurrent` raises the first error to arrive.
  - `aggregate_concurrent` waits for every callable. It raises a single error as it is,
    or several errors as an aggregate.
- `kindtool.iostreams`: the `IOStreams` dataclass (`stdin`, `stdout`, `stderr`).
  `standard_iostreams()` binds it to the process's own streams.
- `kindtool.runner`: runs external commands.
  - `Cmd` and `Cmder` are abstract interfaces. `LocalCmd` and `LocalCmder` implement
    them with local processes.
  - `command` and `command_context` use a default cmder. `command_context` takes a
    timeout in seconds and kills the process when it runs out.
  - A failure raises an error that wraps a `RunError`. `RunError` carries the command,
    its combined output and the underlying error. `run_error_for_error` digs it out of
    a cause chain.
  - Helpers: `output`, `output_lines`, `combined_output_lines`, `inherit_output`,
    `run_with_stdout_reader`, `run_with_stdin_writer` and `pretty_command`.
- `kindtool.fs`: filesystem helpers.
  - `temp_dir` creates a temporary directory. On macOS it turns `/var/...` into the
    mountable `/private/var/...`.
  - `is_abs` accepts both POSIX and host absolute paths.
  - `copy` copies recursively, keeps modes and follows symlinks.
  - `copy_file` copies a single file.
- `kindtool.version`: version strings.
  - `version()` gives the semantic version.
  - `build_version(core, pre_release, commit, commit_count)` assembles one.
  - `display_version()` adds the Python version and the platform.
  - `truncate` cuts a string to a maximum length.
  - `main` is the command-line entry point.
- `kindtool.images`: image helpers.
  - `sanitize_image` adds the `docker.io` domain, the `library` repository and the
    `latest` tag where they are missing.
  - `remove_duplicates` keeps the first occurrence of each item.
  - `check_if_image_retag_required(node, image_id, image_name, tag_fetcher)` returns
    `(exists, retag_required, sanitized_name)`.
  - `image_id` and `save` call `docker image inspect` and `docker save`.

## Installing

```
pip install .
```

Install the test extra with `pip install .[test]`, then run `pytest`.

## Examples

```python
from kindtool import runner

lines = runner.output_lines(runner.command("echo", "hello"))
print(lines)  # ['hello']

print(runner.pretty_command("docker", "save", "-o", "my images.tar"))
# docker save -o 'my images.tar'
```

```python
from kindtool.images import sanitize_image

sanitize_image("ubuntu:18.04")        # 'docker.io/library/ubuntu:18.04'
sanitize_image("other-registry/baz")  # 'docker.io/other-registry/baz:latest'
```

```python
from kindtool import errors

try:
    raise errors.wrap(errors.new("disk full"), "failed to save image")
except Exception as exc:
    print(exc)  # failed to save image: disk full
```

## Command line

```
kindtool-version
```

This prints the full version line, including the Python version and the
platform. Pass `-q` to print only the semantic version.

## What this package does not do

The package does not create, list or delete clusters. It has no node objects
and does not load images or archives into nodes. The only command it installs
is `kindtool-version`. The image helpers stop at looking up image IDs,
sanitizing names, checking tags through a fetcher you supply, and saving
images with `docker save`.