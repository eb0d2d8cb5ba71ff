"""Command line entry: pull container images listed in a file and save them as tarballs."""

from __future__ import annotations

import argparse
import logging
import platform
from collections.abc import Sequence
from dataclasses import dataclass

from imagefetch.fileutil import clean_dir, is_exist, mkdirs, read_lines
from imagefetch.shell import (
    CommandError,
    LogMessage,
    SecretShell,
    run_command,
    run_shell_steps,
)
from imagefetch.version import get_version

logger = logging.getLogger(__name__)

SEALOS_VERSION = "4.3.8"
SEALOS_BIN = "files/sealos"

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


@dataclass
class DownloadOptions:
    """Settings for one download run."""

    download_path: str = "/tmp/images"
    cleanup: bool = False
    download_txt: str = ""
    registry_username: str = "cuisongliu"
    registry_password: str = ""
    registry_domain: str = "ghcr.io"
    debug: bool = False


def _host_arch() -> str:
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


def image_tar_name(src: str) -> str:
    """Return the tarball name for an image reference of the form domain/repo/name:tag.

    References with another number of path parts are returned unchanged;
    a last part that is not exactly name:tag gives an empty string.
    """
    parts = src.split("/")
    if len(parts) != 3:
        return src
    name = parts[2].split(":")
    if len(name) != 2:
        return ""
    return f"{name[0]}_{name[1]}.tar"


def read_image_list(path: str) -> list[str]:
    """Return the image references in a list file, skipping lines starting with '#'."""
    images = []
    for line in read_lines(path):
        if line.startswith("#"):
            logger.info("skip line %s", line)
            continue
        images.append(line)
    return images


def sealos_package_name(arch: str | None = None) -> str:
    """Return the path of the bundled sealos archive for an architecture."""
    return f"files/sealos_{SEALOS_VERSION}_linux_{arch or _host_arch()}.tar.gz"


def extract_sealos(arch: str | None = None) -> None:
    """Unpack the bundled sealos binary into files/ and make it executable."""
    fname = sealos_package_name(arch)
    if not is_exist(fname):
        raise FileNotFoundError(f"sealos package {fname} not exist")
    run_command(
        f"tar -xvf {fname} sealos && mv sealos files/ && sudo chmod a+x {SEALOS_BIN}"
    )


def download_images(options: DownloadOptions) -> list[str]:
    """Log in, pull and save every listed image, then clean up and log out.

    Returns the paths of the tarballs that were saved. A failed pull or save
    is logged and skipped; a failed login raises CommandError.
    """
    try:
        images = read_image_list(options.download_txt)
    except OSError as exc:
        logger.error("get download urls error %s", exc)
        return []
    if not images:
        return []

    domain = options.registry_domain
    run_shell_steps(
        [
            LogMessage(f"sealos login {domain}"),
            SecretShell(
                f"sudo {SEALOS_BIN} login -u {options.registry_username} "
                f"-p {options.registry_password} {domain}"
            ),
        ],
        [options.registry_password],
    )

    saved = []
    for image in images:
        logger.info("pull image: %s", image)
        try:
            run_command(f"sudo {SEALOS_BIN} pull --policy=always {image}")
        except CommandError as exc:
            logger.error("pull image %s error %s", image, exc)
            continue
        tar_path = f"{options.download_path}/{image_tar_name(image)}"
        try:
            run_command(f"sudo {SEALOS_BIN} save -o  {tar_path} {image}")
        except CommandError as exc:
            logger.error("save image %s error: %s", image, exc)
            continue
        saved.append(tar_path)

    for cleanup in (
        f"sudo {SEALOS_BIN} rmi `sudo {SEALOS_BIN} images -aq `",
        f"sudo {SEALOS_BIN} logout {domain}",
    ):
        try:
            run_command(cleanup)
        except CommandError:
            pass
    logger.info(
        "download package [%d] success, path is %s", len(images), options.download_path
    )
    return saved


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="download")
    parser.add_argument("--version", action="version", version=str(get_version()))
    parser.add_argument("-d", "--download-path", default="/tmp/images", help="download path")
    parser.add_argument(
        "-c", "--cleanup", action="store_true", help="cleanup download package"
    )
    parser.add_argument("-f", "--download-txt", default="", help="download images txt file")
    parser.add_argument(
        "-u", "--registry-username", default="cuisongliu", help="registry username"
    )
    parser.add_argument("-p", "--registry-password", default="", help="registry password")
    parser.add_argument("-r", "--registry-domain", default="ghcr.io", help="registry domain")
    parser.add_argument("--debug", action="store_true", help="debug mode")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the download command and return its exit status."""
    try:
        args = _parser().parse_args(argv)
    except SystemExit as exc:
        return 0 if exc.code in (0, None) else 1

    options = DownloadOptions(
        download_path=args.download_path,
        cleanup=args.cleanup,
        download_txt=args.download_txt,
        registry_username=args.registry_username,
        registry_password=args.registry_password,
        registry_domain=args.registry_domain,
        debug=args.debug,
    )
    logging.basicConfig(
        level=logging.DEBUG if options.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    if not options.download_txt:
        logger.error("download txt file is empty")
        return 1
    if not is_exist(options.download_path):
        mkdirs(options.download_path)
        logger.warning("download path %s is not exist, create it", options.download_path)
    if not options.registry_password:
        logger.error("registry password is empty")
        return 1
    if not options.registry_username:
        logger.error("registry username is empty")
        return 1

    logger.info("download path is %s", options.download_path)
    if options.cleanup:
        clean_dir(options.download_path)
    try:
        mkdirs(options.download_path)
    except OSError:
        pass

    try:
        extract_sealos()
    except FileNotFoundError as exc:
        logger.critical("%s", exc)
        return 1
    except CommandError as exc:
        logger.critical("unzip %s error %s", sealos_package_name(), exc)
        return 1

    try:
        download_images(options)
    except CommandError as exc:
        logger.critical("sealos login error %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())