"""Module to write training examples and summaries to CSV files."""

import os

__all__ = ["CSVWriter"]


class CSVWriter:
    """Writes flat records to a CSV file.

    The first record written to the file defines its header. It can only be
    used to store basic quantities (scalars, booleans, strings).

    Typical configuration should look like:

    .. code-block:: yaml

        writer:
          name: csv
          file_name: training.csv
    """

    name = "csv"

    def __init__(self, file_name="output.csv", overwrite=False, append=False):
        """Initialize the basics of the output file.

        Parameters
        ----------
        file_name : str, default 'output.csv'
            Name of the output CSV file
        overwrite : bool, default False
            If `True`, overwrite the output file if it already exists
        append : bool, default False
            If `True`, add more rows to an existing CSV file
        """
        # Check that the output file does not already exist, if requested
        if not overwrite and not append and os.path.isfile(file_name):
            raise FileExistsError(f"File with name {file_name} already exists.")

        self.file_name = file_name
        self.keys = None
        if append:
            if not os.path.isfile(file_name):
                raise FileNotFoundError(
                    f"File not found at path: {file_name}. When using "
                    "`append=True` in CSVWriter, the file must exist at "
                    "the prescribed path before data is written to it."
                )

            with open(self.file_name, "r", encoding="utf-8") as out_file:
                self.keys = out_file.readline().strip().split(",")

    def create(self, record):
        """Writes the header of the CSV file, records the keys to be stored.

        Parameters
        ----------
        record : dict
            First record to be written to the file
        """
        self.keys = list(record.keys())
        with open(self.file_name, "w", encoding="utf-8") as out_file:
            out_file.write(",".join(self.keys) + "\n")

    def append(self, record):
        """Appends one record to the CSV file.

        Parameters
        ----------
        record : dict
            Dictionary of (key, value) pairs. The keys must match the header.
        """
        if self.keys is None:
            self.create(record)

        elif list(record.keys()) != self.keys:
            missing = set(self.keys).difference(record.keys())
            excess = set(record.keys()).difference(self.keys)
            raise AssertionError(
                "The keys of this record do not match the header of the CSV "
                f"file. Missing keys: {sorted(missing)}, new keys: "
                f"{sorted(excess)}."
            )

        with open(self.file_name, "a", encoding="utf-8") as out_file:
            out_file.write(",".join(str(record[k]) for k in self.keys) + "\n")
