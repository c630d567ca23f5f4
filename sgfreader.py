#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# sgfreader.py (Smart Game Format stream reader & game tree library)
# Copyright © 2000-2021 David John Goodger (goodger@python.org)
#
# This library is free software; you can redistribute it and/or modify it
# under the terms of the GNU Lesser General Public License as published by the
# Free Software Foundation; either version 2 of the License, or (at your
# option) any later version.
#
# This library is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or
# FITNESS FOR A PARTICULAR PURPOSE.  See the GNU Lesser General Public License
# for more details.
#
# You should have received a copy of the GNU Lesser General Public License
# (lgpl.txt) along with this library; if not, write to the Free Software
# Foundation, Inc., 59 Temple Place, Suite 330, Boston, MA  02111-1307  USA
# The license is currently available on the Internet at:
#     http://www.gnu.org/copyleft/lesser.html

"""
==================================================
 Smart Game Format Stream Reader: sgfreader
==================================================

version 1.0

Description
===========

This library contains a recursive-descent reader for SGF, the Smart Game
Format, and the classes of the in-memory game tree it builds. SGF is a text
only, tree based file format designed to store game records of board games
for two players. (See `the official SGF specification
<https://www.red-bean.com/sgf/>`_.)

The grammar::

    Collection = { GameTree }
    GameTree   = "(" Sequence { GameTree } ")"
    Sequence   = Node { Node }
    Node       = ";" { Property }
    Property   = PropIdent PropValue { PropValue }
    PropIdent  = UcLetter [ UcLetter ]
    PropValue  = "[" ValueBody "]"

Given a string, a bytestring, or a readable stream, the `Parser` class pulls
characters one at a time through a `CharCursor` (one character of pushback,
never more) and returns a `Collection` of `GameTree` objects, one per game.
Each `GameTree` holds a `Sequence` of `Node` objects (its main line) and a
list of child `GameTree` objects (the variations that branch after it).
Each `Node` is an ordered list of `Property` tuples, an identifier with one
or more decoded text values.

Property identifiers are checked for syntax only (one or two upper case
letters); their meaning is never interpreted. Values are unescaped: the
backslash escapes the next character, escaped line breaks ("soft" line
breaks) are removed, tabs become spaces, and undecodable bytes are dropped.
Nothing is written back out as SGF.

In addition, this library contains:

* Cursor: step through a game tree node by node.

* DumpCLI: print the tree structure of an SGF file (``sgfdump``).
"""


import sys
import io
import codecs
import copy
import argparse
import datetime
import logging
import re
import textwrap
import collections
import weakref


DEFAULT_ENCODING = 'UTF-8'
"""Encoding used to decode bytes input."""

LOGGER_NAME = 'sgfreader'
"""Name of the default logger handed to `Parser` objects."""

LOG_FORMAT = '%(levelname)s: %(message)s'
"""Log message format used by the command-line tools."""

DUMP_LEVEL_MARK = '-'
"""Repeated once per nesting level in `dump_tree` output."""

READ_CHUNK_SIZE = 8192
"""Number of bytes (or characters) pulled from a stream at a time."""

TREE_START = '('
TREE_END = ')'
NODE_START = ';'
VALUE_START = '['
VALUE_END = ']'
ESCAPE = '\\'

WHITESPACE = ' \t\r\n'
"""Characters ignored around delimiters and trimmed from identifiers."""

LINE_BREAKS = ('\r', '\n')

INVALID_CHAR = '\ufffd'
"""Stands in for undecodable input; skipped by the readers."""

BYTE_ORDER_MARK = '\ufeff'
"""Dropped when it is the first character of the input."""

END = ''
"""Returned by `CharCursor.read()` at the end of the input."""


class Error(Exception):
    """Base class for sgfreader exceptions."""
    pass

# Parsing Exceptions

class ParseError(Error):

    """
    Base class for parsing exceptions: a problem with the SGF data.

    `line` and `column` (1-based) locate the point where the problem was
    detected, when known.
    """

    def __init__(self, message, line=None, column=None):
        self.line = line
        self.column = column
        if line is not None:
            message = f'{message} (line {line}, column {column})'
        super().__init__(message)

class InvalidIdentifierError(ParseError):
    """Raised by `Parser.parse_prop_ident()`."""
    pass

class UnterminatedValueError(ParseError):
    """Raised by `Parser.parse_prop_value()`."""
    pass

class MalformedValueError(ParseError):
    """Raised by `Parser.parse_prop_value()`."""
    pass

class EmptySequenceError(ParseError):
    """Raised by `Parser.parse_sequence()`."""
    pass

class UnexpectedEndError(ParseError):
    """Raised by any `Parser` method when the data ends mid-structure."""
    pass

class StructuralError(ParseError):
    """Raised where only a specific set of delimiters is legal."""
    pass

# Programming Errors

class CursorError(Error):
    """Raised by `CharCursor.unread()` when the pushback contract is broken."""
    pass

# Tree Navigation Exceptions

class TreeNavigationError(Error):
    """Base class for game tree navigation, and raised by `Cursor.next()`."""
    pass

class TreeEndError(TreeNavigationError):
    """Raised by `Cursor.next()`, `Cursor.previous()`."""
    pass


class Collection(list):

    """
    A `Collection` is a `list` of `GameTree` objects, in document order. As
    returned by `Parser.parse()` it is meant to be read only.
    """

    path = None

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, list.__repr__(self))

    def cursor(self, gamenum=0):
        """Returns a `Cursor` object for navigation of the given `GameTree`."""
        return Cursor(self[gamenum])

    @classmethod
    def load(cls, path=None, data=None, encoding=DEFAULT_ENCODING,
             logger=None):
        """
        Return a `Collection` loaded from a filesystem `path` (`None` or "-" reads
        from <stdin>) or from `data` (`str` or `bytes`).

        `logger` is passed on to the `Parser`.
        """
        if data is None:
            if path == '-':
                path = None
            if path:
                with open(path, 'rb') as src:
                    data = src.read()
            else:
                # read bytestring from <stdin>:
                data = sys.stdin.buffer.read()
        parser = Parser(data, encoding=encoding, logger=logger)
        collection = parser.parse()
        collection.path = path
        return collection


class GameTree:

    """
    An SGF game tree: a sequence of `Node` objects (the main line of the game
    or variation) and optional child game trees (variations branching after
    the last node of the sequence).

    Instance attributes:

    self.sequence : `Sequence`
       Nodes of this game tree, prior to any variations. Never empty once
       parsed.

    self.children : list of `GameTree`
       Variations, in document order. `self.children[0]` continues the main
       line.

    self.parent : `GameTree` or `None`
       The game tree containing this one (`None` at the top level). Held as a
       weak reference; set only by `add_child()`. A variation kept after its
       top-level tree has been discarded reports `None`. A deep copy points
       its children at the copy; a variation deep-copied on its own becomes
       a top-level tree.

    Trees built by `Parser` are meant to be read, not modified.
    """

    def __init__(self, sequence=None, children=None):
        self.sequence = Sequence() if sequence is None else sequence
        self.children = []
        self._parent = None
        for child in children or ():
            self.add_child(child)

    @property
    def parent(self):
        if self._parent is None:
            return None
        return self._parent()

    def add_child(self, child):
        """Append `child` as the last variation, and point it back here."""
        self.children.append(child)
        child._parent = weakref.ref(self)
        return child

    def __deepcopy__(self, memo):
        gametree = self.__class__(copy.deepcopy(self.sequence, memo))
        memo[id(self)] = gametree
        for child in self.children:
            gametree.add_child(copy.deepcopy(child, memo))
        return gametree

    def __eq__(self, other):
        if not isinstance(other, GameTree):
            return NotImplemented
        return (self.sequence == other.sequence
                and self.children == other.children)

    def __repr__(self):
        return '{}({!r}, {!r})'.format(
            self.__class__.__name__, self.sequence, self.children)

    def root(self):
        """Return the top-level `GameTree` containing `self`."""
        gametree = self
        while gametree.parent is not None:
            gametree = gametree.parent
        return gametree

    def depth(self):
        """Return the variation nesting depth (0 for a top-level tree)."""
        depth = 0
        gametree = self.parent
        while gametree is not None:
            depth += 1
            gametree = gametree.parent
        return depth

    def walk(self):
        """Yield `self` and every descendant `GameTree`, in document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def mainline(self):
        """
        Return the main line of the game (this sequence, then the main line
        of the first variation) as a new `Sequence`.
        """
        nodes = Sequence(self.sequence)
        if self.children:
            nodes.extend(self.children[0].mainline())
        return nodes

    def property_search(self, ident, getall=False):
        """
        Search this `GameTree` for nodes containing property `ident`.
        Return a `Sequence` containing the matched node(s): all of them if
        `getall` is true, otherwise only the first.
        """
        matches = Sequence()
        for gametree in self.walk():
            for node in gametree.sequence:
                if ident in node:
                    matches.append(node)
                    if not getall:
                        return matches
        return matches


class Sequence(list):

    """
    An ordered run of `Node` objects within one game tree, no branching.
    Read only once parsed.
    """

    def __str__(self):
        return ''.join(str(node) for node in self)

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, list.__repr__(self))


class Node(list):

    """
    An SGF node (one move or play, or initial setup): an ordered list of
    `Property` objects, which may be empty. Identifiers may repeat; each
    occurrence is kept, in order. Parsed nodes are not meant to be modified.

    Example: Let ``node`` be a `Node` parsed from ';B[aa]AB[bb][cc]':

    * node.get('B')  =>  ('aa',)
    * node.get('AB') =>  ('bb', 'cc')
    * 'AB' in node   =>  True
    """

    def __str__(self):
        """Display form, e.g. ";B[aa]C[hi]". Values are not escaped."""
        return ';' + ''.join(str(prop) for prop in self)

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, list.__repr__(self))

    def __contains__(self, item):
        if isinstance(item, str):
            return any(prop.ident == item for prop in self)
        return list.__contains__(self, item)

    def get(self, ident, default=None):
        """Return the values of the first `ident` property, or `default`."""
        for prop in self:
            if prop.ident == ident:
                return prop.values
        return default

    def idents(self):
        """Return the property identifiers, in order."""
        return [prop.ident for prop in self]


class Property(collections.namedtuple('Property', 'ident values')):

    """
    One property: `ident` (1-2 upper case letters) and `values`, a tuple of
    decoded text values in source order. Compared by content.
    """

    __slots__ = ()

    def __str__(self):
        return self.ident + ''.join(f'[{value}]' for value in self.values)


class Cursor:

    """
    `GameTree` navigation tool.

    Instance attributes:

    - self.game : `GameTree` -- The root `GameTree`.
    - self.gametree : `GameTree` -- The current `GameTree`.
    - self.node : `Node` -- The current Node.
    - self.nodenum : integer -- The offset of `self.node` from the root of
      `self.game`. The nodenum of the root node is 0.
    - self.index : integer -- The offset of `self.node` within
      `self.gametree.sequence`.
    - self.children : list of `Node` -- All child nodes of the current node.
    - self.at_end : boolean -- Flags if we are at the end of a branch.
    - self.at_start : boolean -- Flags if we are at the start of the game.
    """

    def __init__(self, gametree):
        self.game = gametree                    # root GameTree
        self.reset()

    def reset(self):
        """Set `Cursor` to point to the start of the root `GameTree`."""
        self.gametree = self.game
        self.nodenum = 0
        self.index = 0
        self.node = self.gametree.sequence[self.index]
        self._set_children()
        self._set_flags()

    def next(self, branch=0):
        """
        Move the `Cursor` to & return the next `Node`.

        Argument:

        * branch : integer, default 0 -- Branch number. A non-zero value is
          only valid at a branching, where branches exist.

        Raise `TreeEndError` if the end of a branch is exceeded.
        Raise `TreeNavigationError` if a non-existent branch is accessed.
        """
        if self.index + 1 < len(self.gametree.sequence):    # more main line?
            if branch != 0:
                raise TreeNavigationError('Nonexistent branch.')
            self.index += 1
        elif self.gametree.children:                        # branches exist?
            if 0 <= branch < len(self.gametree.children):
                self.gametree = self.gametree.children[branch]
                self.index = 0
            else:
                raise TreeNavigationError('Nonexistent branch.')
        else:
            raise TreeEndError('End of branch.')
        self.node = self.gametree.sequence[self.index]
        self.nodenum += 1
        self._set_children()
        self._set_flags()
        return self.node

    def previous(self):
        """
        Move the `Cursor` to & return the previous `Node`.

        Raise `TreeEndError` if the start of the game is exceeded.
        """
        if self.index > 0:                          # more main line?
            self.index -= 1
        elif self.gametree is not self.game:        # were we in a branch?
            self.gametree = self.gametree.parent
            self.index = len(self.gametree.sequence) - 1
        else:
            raise TreeEndError('Start of game.')
        self.node = self.gametree.sequence[self.index]
        self.nodenum -= 1
        self._set_children()
        self._set_flags()
        return self.node

    def _set_children(self):
        """Set up `self.children`."""
        if self.index + 1 < len(self.gametree.sequence):
            self.children = [self.gametree.sequence[self.index + 1]]
        else:
            self.children = [
                child.sequence[0] for child in self.gametree.children]

    def _set_flags(self):
        """Set up the flags `self.at_end` and `self.at_start`."""
        self.at_end = (
            not self.gametree.children
            and (self.index + 1 == len(self.gametree.sequence)))
        self.at_start = self.gametree is self.game and self.index == 0


class CharCursor:

    """
    Pull-based character source with exactly one character of pushback.

    `source` may be a `str`, a `bytes` object, or a readable text or binary
    stream. Bytes are decoded incrementally with `encoding`; undecodable
    bytes come out as `INVALID_CHAR`. Line breaks are passed through
    untranslated, and a leading `BYTE_ORDER_MARK` is dropped.

    `read()` returns one character, or `END` when the input is exhausted.
    `unread(char)` returns the character just read to the front of the
    input; it is only valid immediately after the `read()` that returned
    `char`, with no other pushback pending.
    """

    def __init__(self, source, encoding=DEFAULT_ENCODING):
        if isinstance(source, str):
            self.stream = None
            self.buffer = source
        else:
            if isinstance(source, (bytes, bytearray)):
                source = io.BytesIO(source)
            self.stream = source
            self.buffer = ''
        self.decoder = codecs.getincrementaldecoder(encoding)(
            errors='replace')
        self.started = False
        self.offset = 0
        self.pushback = None
        self.last = None
        self.line = 1
        self.column = 1
        self.previous_position = (1, 1)

    def read(self):
        """Return the next character, or `END`."""
        if self.pushback is not None:
            char = self.pushback
            self.pushback = None
        elif self._fill():
            char = self.buffer[self.offset]
            self.offset += 1
        else:
            char = END
        self.last = char
        self.previous_position = (self.line, self.column)
        if char == '\n':
            self.line += 1
            self.column = 1
        elif char:
            self.column += 1
        return char

    def unread(self, char):
        """Push `char`, the character just read, back onto the input."""
        if self.pushback is not None:
            raise CursorError(
                f'Cannot push back {char!r}: {self.pushback!r} is already '
                f'pending.')
        if char == END or char != self.last:
            raise CursorError(
                f'Cannot push back {char!r}: it is not the last character '
                f'read.')
        self.pushback = char
        self.last = None
        self.line, self.column = self.previous_position

    def _fill(self):
        """Make sure `self.buffer` has an unread character; false at end."""
        while self.offset >= len(self.buffer):
            if self.stream is None:
                return False
            chunk = self.stream.read(READ_CHUNK_SIZE)
            if isinstance(chunk, (bytes, bytearray)):
                text = self.decoder.decode(chunk, final=not chunk)
            else:
                text = chunk
            if not chunk:
                self.stream = None
            self.buffer = text
            self.offset = 0
        if not self.started:
            self.started = True
            if self.buffer.startswith(BYTE_ORDER_MARK, self.offset):
                self.offset += 1
                return self._fill()
        return True


def is_valid_prop_ident(ident):
    """Check whether `ident` is a well-formed PropIdent (1-2 of A-Z)."""
    return bool(Parser.patterns.prop_ident.match(ident))


class Parser:

    """
    Recursive-descent parser for SGF data. Creates a tree structure based on
    the SGF standard itself. `Parser.parse()` will return a `Collection`
    object for the entire data.

    Each ``parse_*`` method reads one grammar construct from `self.cursor`
    and leaves the cursor just past it; any character that belongs to the
    caller is pushed back unconsumed.

    Only `parse()` writes to `self.logger` (default: the "sgfreader"
    logger); the inner readers raise `ParseError` subclasses instead.
    """

    class patterns:
        """Regular expression text matching patterns."""
        prop_ident = re.compile(r'\A[A-Z]{1,2}\Z')

    def __init__(self, source, encoding=DEFAULT_ENCODING, logger=None):
        if isinstance(source, CharCursor):
            self.cursor = source
        else:
            self.cursor = CharCursor(source, encoding)
        if logger is None:
            logger = logging.getLogger(LOGGER_NAME)
        self.logger = logger

        self.depth = 0
        """Number of game trees opened but not yet closed."""

    def error(self, error_class, message):
        """Return an `error_class` exception located at the cursor."""
        return error_class(message, self.cursor.line, self.cursor.column)

    def read_significant(self):
        """
        Consume & return the next character that is neither whitespace nor
        `INVALID_CHAR` (or `END`).
        """
        char = self.cursor.read()
        while char and (char in WHITESPACE or char == INVALID_CHAR):
            char = self.cursor.read()
        return char

    def peek_significant(self):
        """Skip insignificant input; return the next character, unconsumed."""
        char = self.read_significant()
        if char != END:
            self.cursor.unread(char)
        return char

    def parse(self):
        """
        Parse the SGF data, and return a `Collection`.

        A problem in the first game tree of the data is fatal: its
        `ParseError` propagates. A problem in any later game tree is logged
        as a warning, the data is resynchronized (see `resynchronize()`), and
        parsing continues with the next game tree.
        """
        collection = Collection()
        gamenum = 0
        skipped = 0
        while True:
            gamenum += 1
            try:
                gametree = self.parse_one_game()
            except ParseError as error:
                if gamenum == 1:
                    raise
                skipped += 1
                self.logger.warning(
                    'Skipping malformed game tree %d: %s', gamenum, error)
                self.resynchronize()
                continue
            if gametree is None:
                break
            self.logger.debug(
                'Parsed game tree %d: %d nodes, %d variations.', gamenum,
                len(gametree.sequence), len(gametree.children))
            collection.append(gametree)
        self.logger.info(
            'Parsed %d game tree(s); skipped %d.', len(collection), skipped)
        return collection

    def parse_one_game(self):
        """
        Parse one game from the data. Return a `GameTree` containing one
        game, or `None` if the end of the data has been reached.
        """
        if self.peek_significant() == END:
            return None
        self.depth = 0
        return self.parse_game_tree()

    def resynchronize(self):
        """
        Skip past the remains of a game tree that failed to parse.

        Discards data until every game tree left open by the failure is
        closed, then stops in front of the next "(" at the top level (or at
        the end of the data). Property values are skipped whole, so
        delimiters inside them are not counted.
        """
        depth = self.depth
        while True:
            char = self.cursor.read()
            if char == END:
                self.logger.debug(
                    'Reached the end of the data while skipping a malformed '
                    'game tree.')
                return
            if char == VALUE_START:
                self.skip_value_body()
            elif char == TREE_START:
                if depth == 0:
                    self.cursor.unread(char)
                    return
                depth += 1
            elif char == TREE_END and depth > 0:
                depth -= 1

    def skip_value_body(self):
        """Consume a raw property value body, up to its unescaped "]"."""
        escaped = False
        while True:
            char = self.cursor.read()
            if char == END:
                return
            if escaped:
                escaped = False
            elif char == ESCAPE:
                escaped = True
            elif char == VALUE_END:
                return

    def parse_game_tree(self):
        """
        Parse and return one `GameTree`: "(" Sequence { GameTree } ")".

        Child game trees are parsed recursively and attached in order.
        """
        char = self.read_significant()
        if char == END:
            raise self.error(
                UnexpectedEndError, 'End of data before a game tree.')
        if char != TREE_START:
            self.cursor.unread(char)
            raise self.error(
                StructuralError,
                f'Expected "(" to start a game tree, found {char!r}.')
        self.depth += 1
        gametree = GameTree(self.parse_sequence())
        while True:
            char = self.peek_significant()
            if char == END:
                raise self.error(
                    UnexpectedEndError,
                    'End of data inside a game tree (missing ")").')
            elif char == TREE_START:
                gametree.add_child(self.parse_game_tree())
            elif char == TREE_END:
                self.cursor.read()
                self.depth -= 1
                return gametree
            elif char == NODE_START:
                raise self.error(
                    StructuralError, 'A node was encountered after a branch.')
            else:
                raise self.error(
                    StructuralError,
                    f'Unexpected {char!r} in a game tree; expected "(" or '
                    f'")".')

    def parse_sequence(self):
        """
        Parse and return a `Sequence` of one or more nodes. Stops in front of
        the "(" or ")" that follows it.

        Raise `EmptySequenceError` if no node is found.
        """
        sequence = Sequence()
        while True:
            char = self.peek_significant()
            if char == END:
                raise self.error(
                    UnexpectedEndError, 'End of data inside a sequence.')
            elif char == NODE_START:
                sequence.append(self.parse_node())
            elif char in (TREE_START, TREE_END):
                break
            else:
                raise self.error(
                    StructuralError,
                    f'Unexpected {char!r} in a sequence; expected ";".')
        if not sequence:
            raise self.error(
                EmptySequenceError, 'A game tree must contain a node.')
        return sequence

    def parse_node(self):
        """
        Parse and return one `Node`, which can be empty.

        Consumes the ";" and the properties that follow, up to (but not
        including) the next ";", "(", or ")".
        """
        char = self.read_significant()
        if char == END:
            raise self.error(UnexpectedEndError, 'End of data before a node.')
        if char != NODE_START:
            self.cursor.unread(char)
            raise self.error(
                StructuralError, f'Expected ";" to start a node, found {char!r}.')
        node = Node()
        while True:
            char = self.peek_significant()
            if char == END:
                raise self.error(
                    UnexpectedEndError, 'End of data inside a node.')
            if char in (NODE_START, TREE_START, TREE_END):
                return node
            node.append(self.parse_property())

    def parse_property(self):
        """
        Parse and return one `Property`: PropIdent PropValue { PropValue }.

        Values are read while the next non-whitespace character is "[".
        Anything else (";", "(", ")", the next identifier, the end of the
        data) ends the property and is left unconsumed.
        """
        ident = self.parse_prop_ident()
        values = []
        while self.peek_significant() == VALUE_START:
            values.append(self.parse_prop_value())
        if not values:
            raise self.error(
                StructuralError, f'Property "{ident}" has no values.')
        return Property(ident, tuple(values))

    def parse_prop_ident(self):
        """
        Parse and return a property identifier: the text up to the next "[",
        which is pushed back. Surrounding whitespace is trimmed and
        undecodable characters are dropped.

        Raise `InvalidIdentifierError` unless the result is 1 or 2 upper case
        letters.
        """
        chars = []
        while True:
            char = self.cursor.read()
            if char == END:
                raise self.error(
                    UnexpectedEndError,
                    'End of data inside a property identifier.')
            if char == INVALID_CHAR:
                continue
            if char == VALUE_START:
                self.cursor.unread(char)
                break
            chars.append(char)
        ident = ''.join(chars).strip(WHITESPACE)
        if not is_valid_prop_ident(ident):
            raise self.error(
                InvalidIdentifierError,
                f'Invalid property identifier: {ident!r}.')
        return ident

    def parse_prop_value(self):
        """
        Parse and return one decoded property value, from "[" to the
        matching unescaped "]" inclusive.

        Decoding rules:

        * "\\" escapes the next character, which is kept literally (this is
          how "]" and "\\" get into a value).
        * An escaped line break (CR, LF, CR+LF, or LF+CR) is a soft line
          break, and is removed.
        * Tabs become spaces; unescaped line breaks are kept as they are.
        * Undecodable characters are dropped.

        Raise `UnterminatedValueError` if the data ends before the "]".
        """
        char = self.read_significant()
        if char == END:
            raise self.error(
                UnexpectedEndError, 'End of data before a property value.')
        if char != VALUE_START:
            self.cursor.unread(char)
            raise self.error(
                MalformedValueError,
                f'Expected "[" to open a property value, found {char!r}.')
        start = (self.cursor.line, self.cursor.column - 1)
        parts = []
        escaped = False
        while True:
            char = self.cursor.read()
            if char == END:
                break
            if char == INVALID_CHAR:
                continue
            if char == '\t':
                char = ' '
            if escaped:
                escaped = False
                if char in LINE_BREAKS:
                    following = self.cursor.read()
                    if following == END:
                        break
                    if following == char or following not in LINE_BREAKS:
                        # lone CR or LF; reprocess what follows it
                        self.cursor.unread(following)
                    continue
                parts.append(char)
            elif char == ESCAPE:
                escaped = True
            elif char == VALUE_END:
                return ''.join(parts)
            else:
                parts.append(char)
        raise self.error(
            UnterminatedValueError,
            'End of data inside the property value opened at line {}, '
            'column {}.'.format(*start))


def dump_tree(gametree, level=0):
    """
    Return a list of display lines for `gametree`: one line per game tree,
    each child one level deeper than its parent, in document order.
    """
    lines = [f'{DUMP_LEVEL_MARK * level} {gametree.sequence}']
    for child in gametree.children:
        lines.extend(dump_tree(child, level + 1))
    return lines


def dump_collection(collection):
    """Return the `dump_tree` lines of every game in `collection`."""
    lines = []
    for gametree in collection:
        lines.extend(dump_tree(gametree))
    return lines


class DumpCLI:

    """
    Read an SGF (Smart Game Format) file and print the structure of its game
    trees to standard output: one line per game tree or variation, showing
    its nodes, prefixed with one "-" per level of nesting.

    Malformed games after the first are reported and skipped. The exit
    status is 1 if the file could not be read or parsed at all.
    """

    # Each entry holds the positional & keyword arguments of one
    # `argparse.ArgumentParser.add_argument` call.
    argument_specs = (
        (('source_file',),
         {'type': str,
          'nargs': '?',
          'default': None,
          'help': ('Path to the SGF file to dump. '
                   'Omit or use "-" to read from the standard input.')}),
        (('--encoding', '-e',),
         {'default': DEFAULT_ENCODING,
          'help': (f'Character encoding of the SGF file (default: '
                   f'"{DEFAULT_ENCODING}"). Undecodable bytes are '
                   f'dropped.')}),
        (('--verbose', '-v',),
         {'action': 'store_true',
          'default': False,
          'help': 'Report progress messages.'}),
        (('--debug', '-d',),
         {'action': 'store_true',
          'default': False,
          'help': 'Report debugging messages (implies --verbose).'}),
        (('--quiet', '-q',),
         {'action': 'store_true',
          'default': False,
          'help': 'Report errors only; no warnings.'}),
        (('--help', '-h',),
         {'action': 'help',
          'help': 'Show this help message.'}),
        )

    def __init__(self, settings=None, argv=None):
        """
        `settings` is an `argparse.Namespace` of option values; if `None`,
        it is built from `argv` (default: ``sys.argv[1:]``).
        """
        if settings is None:
            settings = self.process_command_line(argv)
        self.settings = settings

    @classmethod
    def process_command_line(cls, argv=None):
        """Return the settings namespace for the `argv` argument list."""
        parser = argparse.ArgumentParser(
            prog='sgfdump',
            description=textwrap.dedent(cls.__doc__),
            formatter_class=argparse.RawDescriptionHelpFormatter,
            add_help=False)
        for names, params in cls.argument_specs:
            parser.add_argument(*names, **params)
        return parser.parse_args(sys.argv[1:] if argv is None else argv)

    def run(self):
        """Dump the file and return the exit status."""
        try:
            return self.execute()
        except Exception:
            # time-stamp the traceback that follows
            stamp = datetime.datetime.now().isoformat(
                sep=' ', timespec='seconds')
            print(f'\n{stamp}', file=sys.stderr)
            raise

    def execute(self):
        self.configure_logging()
        logger = logging.getLogger(LOGGER_NAME)
        path = self.settings.source_file
        name = path if path and path != '-' else '<stdin>'
        try:
            collection = Collection.load(
                path, encoding=self.settings.encoding, logger=logger)
        except OSError as error:
            logger.error('Unable to read "%s": %s', name, error)
            return 1
        except ParseError as error:
            logger.error('Unable to parse "%s": %s', name, error)
            return 1
        for line in dump_collection(collection):
            print(line)
        return 0

    def configure_logging(self):
        if self.settings.debug:
            level = logging.DEBUG
        elif self.settings.verbose:
            level = logging.INFO
        elif self.settings.quiet:
            level = logging.ERROR
        else:
            level = logging.WARNING
        logging.basicConfig(format=LOG_FORMAT)
        logging.getLogger(LOGGER_NAME).setLevel(level)


def main():
    sys.exit(DumpCLI().run())


if __name__ == '__main__':
    main()
