# imagefetch

`imagefetch` reads a list of container image references from a text file and
uses `sealos` to pull each image and save it as a tarball. The tarballs can
then be carried to machines that cannot reach the registry.

## Requirements

- Linux with `bash`, `tar` and `sudo`
- A sealos release archive for the host architecture, in a `files/`
  directory under the working directory:
  `files/sealos_4.3.8_linux_amd64.tar.gz` or
  `files/sealos_4.3.8_linux_arm64.tar.gz`

The architecture comes from the machine type: `x86_64` is treated as
`amd64` and `aarch64` as `arm64`; any other machine type is used as it is.

## Installation

```
pip install .
```

## Usage

Write one image reference per line in a text file. Lines that start with `#`
are skipped:

```
# control plane
ghcr.io/example/kubernetes:v1.27.0
ghcr.io/example/calico:v3.26.1
```

Run the command:

```
imagefetch -f images.txt -u myuser -p password -d /tmp/images
```

The command works through these steps:

1. Checks that a list file and a registry password were given; if not, it
   logs an error and exits with status 1. A missing download directory is
   created.
2. With `--cleanup`, removes the download directory and creates it again.
3. Unpacks `sealos` from the archive in `files/` into `files/sealos` and
   makes it executable. A missing archive or a failed unpack ends the run
   with status 1.
4. Logs in to the registry with `sudo files/sealos login`. The password is
   masked in the logged command and in error messages. A failed login ends
   the run with status 1.
5. Pulls each image and saves it into the download directory. A failed pull
   or save is logged and that image is skipped.
6. Removes all pulled images from local storage and logs out; failures of
   these two steps are ignored.

A reference of the form `registry/namespace/name:tag` is saved as
`name_tag.tar`. A reference with a different number of `/`-separated parts
is used as the file name unchanged.

### Options

| Option | Default | Meaning |
| --- | --- | --- |
| `-d`, `--download-path` | `/tmp/images` | directory the tarballs are saved to |
| `-c`, `--cleanup` | off | remove the download directory before starting |
| `-f`, `--download-txt` | (required) | file that lists the images |
| `-u`, `--registry-username` | a built-in user name | registry user name |
| `-p`, `--registry-password` | (required) | registry password |
| `-r`, `--registry-domain` | `ghcr.io` | registry to log in to |
| `--debug` | off | debug logging, including each command that is run |
| `--version` | | print the version string and exit |

The command can also be started with `python -m imagefetch.cli`.

## Using the library

The modules can be used from Python:

- `imagefetch.cli`: `image_tar_name`, `read_image_list`,
  `sealos_package_name`, `extract_sealos`, `download_images` with a
  `DownloadOptions`, and `main`.
- `imagefetch.shell`: `run_command`, `run_command_with_output`,
  `run_simple_cmd`, `check_cmd_exists`, `one_line`, and `run_shell_steps`,
  which runs a sequence of steps. A plain string is run through bash;
  `RetryShell` and `RetrySecretShell` are retried with exponential backoff
  for up to about 15 seconds; `SecretShell` masks the given secrets;
  `SkipShell` is not run; `LogMessage` is logged; a callable is called.
  Failures raise `CommandError`.
- `imagefetch.fileutil`: existence checks, line files (`read_lines`,
  `write_lines`), atomic writes (`write_file`, `atomic_write_file`),
  temporary files and directories, cleanup and size helpers.
- `imagefetch.tree`: depth-first listings (`stat_dir`, `get_all_sub_dirs`
  and their link-following forms), `list_by_suffix`, `copy_dir`,
  `copy_file`, `recursion_copy` and `home_dir`.
- `imagefetch.version`: `get_version`, returning a `VersionInfo`.

```python
from imagefetch.cli import image_tar_name, read_image_list
from imagefetch.shell import run_command_with_output

image_tar_name("ghcr.io/example/calico:v3.26.1")   # "calico_v3.26.1.tar"
images = read_image_list("images.txt")
output = run_command_with_output("uname -m", True)
```

## What it does not do

`imagefetch` does not fetch the sealos release archive; it must already be
in `files/`. It does not push or load the saved tarballs anywhere.

## Running the tests

```
pip install ".[test]"
pytest
```