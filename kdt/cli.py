"""
kdt: an experimental, quantum-safe take on GPG.

One action per invocation. Input (messages, keys, names) is read from stdin
until end of input; armored output is written to stdout and status lines to
stderr.
"""
import argparse
import logging
import sys

from kdt import config, database
from kdt.console import read_all_input, report
from kdt.errors import KdtError
from kdt.handler import KdtHandler
from kdt.store import KeyStore

logger = logging.getLogger(__name__)

ANONYMOUS_OWNER = "No name was provided by the key owner!"


# ---------------------------------------------------------------------------
# CLI Commands
# ---------------------------------------------------------------------------

def cmd_gen_key(store: KeyStore, args: argparse.Namespace) -> None:
    report('info', "Type your name below. Note that this will be visible to everyone who imports your public key.")
    name = read_all_input().strip()
    report('info', "Generating owned key set...")
    private_id = store.generate_owned(name or ANONYMOUS_OWNER)
    report('success', f"Successfully created owned key with private id {private_id}!")


def cmd_import(store: KeyStore, args: argparse.Namespace) -> None:
    report('info', "Input the public KDT key below (CTRL-D to finish):")
    public_id = store.import_public(read_all_input())
    report('success', f"Successfully imported KDT public key with id `{public_id}`!")


def cmd_encrypt(store: KeyStore, args: argparse.Namespace) -> None:
    report('info', "Type your message below (CTRL-D to finish):")
    message = read_all_input().strip()
    armored = KdtHandler(store).encrypt(args.encrypt, message)
    report('info', "Encrypted message:")
    print(armored)


def cmd_decrypt(store: KeyStore, args: argparse.Namespace) -> None:
    report('info', "Input the encrypted message below (CTRL-D to finish):")
    plaintext = KdtHandler(store).decrypt(args.decrypt, read_all_input())
    report('info', "Decrypted message:")
    print(plaintext)


def cmd_sign(store: KeyStore, args: argparse.Namespace) -> None:
    report('info', "Input the message to sign below (CTRL-D to finish):")
    message = read_all_input().strip()
    armored = KdtHandler(store).sign(args.sign, message)
    report('info', "Signed message:")
    print(armored)


def cmd_verify(store: KeyStore, args: argparse.Namespace) -> None:
    report('info', "Input the signed message below (CTRL-D to finish):")
    if KdtHandler(store).verify(args.verify, read_all_input()):
        report('success', "The provided message is valid!")
    else:
        report('warn', "The given message is not valid!")


def cmd_list_keys(store: KeyStore, args: argparse.Namespace) -> None:
    if not store.has_public_keys:
        report('fatal', "You don't have any public keys!")
    report('info', "Keys in your public key database:")
    for record in store.public_keys:
        print(f"ID: {record.id}\nOwner: {record.owner}")


def cmd_list_key_pairs(store: KeyStore, args: argparse.Namespace) -> None:
    if not store.has_owned_keysets:
        report('fatal', "You don't have any private keys!")
    report('info', "Keys in your owned key database:")
    for keyset in store.owned_keysets:
        print(f"ID: {keyset.private.id}\nOwner: {keyset.owner}")


def cmd_export_pubkey(store: KeyStore, args: argparse.Namespace) -> None:
    armored = store.export_public(args.export_pubkey)
    report('success', f"Public key for key id {args.export_pubkey}:")
    print(armored)


def cmd_del_pubkey(store: KeyStore, args: argparse.Namespace) -> None:
    report('info', f"Removing public key with id {args.del_pubkey}...")
    store.remove_public(args.del_pubkey)
    report('success', "Successfully removed the public key!")


def cmd_del_keyset(store: KeyStore, args: argparse.Namespace) -> None:
    report('info', f"Removing owned key set with private key id {args.del_keyset}...")
    store.remove_owned(args.del_keyset)
    report('success', "Successfully removed the owned key set!")


# ---------------------------------------------------------------------------
# CLI Definition
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kdt", description="Experimental, quantum-safe successor to GPG")
    parser.add_argument("--db", default=None, help="key database file (default: $KDT_DATABASE_PATH)")

    actions = parser.add_mutually_exclusive_group(required=True)
    actions.add_argument("-g", "--gen-key", action="store_const", const=cmd_gen_key, dest="func",
                         help="generate a new owned key set and store it in the owned key database")
    actions.add_argument("-i", "--import", action="store_const", const=cmd_import, dest="func",
                         help="import a public key from stdin into the public key database")
    actions.add_argument("-e", "--encrypt", metavar="PUBLIC_KEY_ID",
                         help="encrypt stdin against the given public key")
    actions.add_argument("-d", "--decrypt", metavar="PRIVATE_KEY_ID",
                         help="decrypt stdin with the given private key")
    actions.add_argument("-s", "--sign", metavar="PRIVATE_KEY_ID",
                         help="sign stdin with the given private key")
    actions.add_argument("-v", "--verify", metavar="PUBLIC_KEY_ID",
                         help="verify a signed message on stdin against the given public key")
    actions.add_argument("--list-keys", action="store_const", const=cmd_list_keys, dest="func",
                         help="list all keys in the public key database")
    actions.add_argument("-l", "--list-key-pairs", action="store_const", const=cmd_list_key_pairs, dest="func",
                         help="list all keys in the owned key database")
    actions.add_argument("--export-pubkey", metavar="PRIVATE_KEY_ID",
                         help="print the public key of the owned key set with this private key id")
    actions.add_argument("--del-pubkey", metavar="PUBLIC_KEY_ID",
                         help="remove a public key from the public key database")
    actions.add_argument("--del-keyset", metavar="PRIVATE_KEY_ID",
                         help="remove an owned key set from the owned key database")
    return parser


# Options that carry a key id, mapped to their command
_ID_COMMANDS = {
    "encrypt": cmd_encrypt,
    "decrypt": cmd_decrypt,
    "sign": cmd_sign,
    "verify": cmd_verify,
    "export_pubkey": cmd_export_pubkey,
    "del_pubkey": cmd_del_pubkey,
    "del_keyset": cmd_del_keyset,
}


def resolve_command(args: argparse.Namespace):
    for option, func in _ID_COMMANDS.items():
        if getattr(args, option) is not None:
            return func
    return args.func


def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    command = resolve_command(args)

    try:
        store = database.load_store(args.db)
        command(store, args)
        database.save_store(store, args.db)
    except KdtError as e:
        logger.debug("Operation failed", exc_info=True)
        report('fatal', e)


if __name__ == "__main__":
    main(sys.argv[1:])
