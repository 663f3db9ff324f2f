"""recordctl - command-line front end for recordcrypto."""
