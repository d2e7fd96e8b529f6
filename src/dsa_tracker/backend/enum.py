"""Enumeration types for backend"""
from enum import Enum


class Platform(str, Enum):
    """Practice platform a question was solved on"""
    LEETCODE = "LeetCode"
    CODEFORCES = "Codeforces"
    GEEKSFORGEEKS = "GeeksforGeeks"
    HACKERRANK = "HackerRank"
    CODECHEF = "CodeChef"
    ATCODER = "AtCoder"
    OTHER = "Other"


class Difficulty(str, Enum):
    """Question difficulty"""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Topic(str, Enum):
    """Fixed topic taxonomy for questions

    A question carries one or more of these values. The same enumeration is
    used by the create path, the update path and the list filter.
    """
    ARRAY = "Array"
    STRING = "String"
    HASH_TABLE = "Hash Table"
    DYNAMIC_PROGRAMMING = "Dynamic Programming"
    MATH = "Math"
    SORTING = "Sorting"
    GREEDY = "Greedy"
    DEPTH_FIRST_SEARCH = "Depth-First Search"
    BREADTH_FIRST_SEARCH = "Breadth-First Search"
    TREE = "Tree"
    BINARY_SEARCH = "Binary Search"
    MATRIX = "Matrix"
    TWO_POINTERS = "Two Pointers"
    BIT_MANIPULATION = "Bit Manipulation"
    STACK = "Stack"
    HEAP = "Heap"
    GRAPH = "Graph"
    DESIGN = "Design"
    BACKTRACKING = "Backtracking"
    SLIDING_WINDOW = "Sliding Window"
    UNION_FIND = "Union Find"
    TRIE = "Trie"
    RECURSION = "Recursion"
    BINARY_TREE = "Binary Tree"
    BINARY_SEARCH_TREE = "Binary Search Tree"
    LINKED_LIST = "Linked List"
    QUEUE = "Queue"
    OTHER = "Other"


class SolutionLanguage(str, Enum):
    """Language of a saved solution snippet"""
    CPP = "cpp"
    PYTHON = "python"
    JAVA = "java"
    JAVASCRIPT = "javascript"


class QuestionSortField(str, Enum):
    """Sort keys accepted by the question list endpoint"""
    SOLVED_DATE = "solved_date"
    TITLE = "title"
    DIFFICULTY = "difficulty"
    TOPIC = "topic"


class SortOrder(str, Enum):
    """Sort direction"""
    ASC = "asc"
    DESC = "desc"


class ExternalPlatform(str, Enum):
    """Third-party platforms whose profile data can be fetched

    The values double as keys of ``Account.platform_usernames``.
    """
    GITHUB = "github"
    LEETCODE = "leetcode"
    CODEFORCES = "codeforces"
